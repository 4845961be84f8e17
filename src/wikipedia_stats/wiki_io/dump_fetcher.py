"""
Lists and downloads the dated pages-meta-current archives of a wiki.
"""

import logging
import re
import time
from pathlib import Path
from typing import List, Optional

import requests
from tqdm import tqdm

from wikipedia_stats.config.settings import DOWNLOAD_CONFIG
from wikipedia_stats.processing.shared.error_handling import DownloadError


class DumpFetcher:
    """Fetches the archive list of one dump date and downloads every archive"""

    def __init__(
        self,
        download_dir: Path = Path(DOWNLOAD_CONFIG['download_dir']),
        wiki_code: str = DOWNLOAD_CONFIG['wiki_code'],
        base_url: str = DOWNLOAD_CONFIG['base_url'],
        max_retries: int = DOWNLOAD_CONFIG['max_retries'],
        retry_delay: int = DOWNLOAD_CONFIG['retry_delay'],
        timeout: int = DOWNLOAD_CONFIG['timeout'],
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.download_dir = Path(download_dir).expanduser()
        self.wiki_code = wiki_code
        self.base_url = base_url.rstrip('/') + '/'
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)
        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': 'WikipediaStats/1.0'})

    def dump_url(self, date: str) -> str:
        return f"{self.base_url}{self.wiki_code}/{date}/"

    def archive_pattern(self, date: str) -> re.Pattern:
        return re.compile(
            rf"{re.escape(self.wiki_code)}-{date}-pages-meta-current1+\.xml-p[0-9]+p[0-9]+\.bz2"
        )

    def list_archives(self, date: str) -> List[str]:
        """
        Archive names listed in the dump status of ``date``.

        Args:
            date: Dump date as YYYYMMDD

        Returns:
            Sorted, de-duplicated archive file names
        """
        status_url = f"{self.dump_url(date)}dumpstatus.json"
        try:
            response = self.session.get(status_url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise DownloadError(f"Cannot fetch dump status {status_url}: {e}") from e

        names = sorted(set(self.archive_pattern(date).findall(response.text.lower())))
        self.logger.info(f"Found {len(names)} archives for {self.wiki_code} {date}")
        return names

    def fetch(self, date: str) -> List[Path]:
        """Download every archive of a dump date and return the local paths."""
        names = self.list_archives(date)
        if not names:
            raise DownloadError(f"No archives found for {self.wiki_code} dump {date}")

        self.download_dir.mkdir(parents=True, exist_ok=True)
        return [self.download_file(f"{self.dump_url(date)}{name}", self.download_dir / name) for name in names]

    def download_file(self, url: str, output_path: Path, chunk_size: int = 8192) -> Path:
        """
        Download with retries and a progress bar; skips files already present.

        Raises:
            DownloadError: If every attempt fails
        """
        if output_path.exists():
            self.logger.info(f"File already exists, skipping download: {output_path}")
            return output_path

        temp_path = output_path.with_suffix(output_path.suffix + ".tmp")

        for attempt in range(self.max_retries):
            try:
                with self.session.get(url, stream=True, timeout=self.timeout) as r:
                    r.raise_for_status()
                    total = int(r.headers.get("Content-Length", 0))
                    with open(temp_path, "wb") as f, tqdm(
                        total=total, unit='B', unit_scale=True, unit_divisor=1024,
                        desc=f"Downloading {output_path.name}", initial=0
                    ) as bar:
                        for chunk in r.iter_content(chunk_size=chunk_size):
                            if chunk:
                                f.write(chunk)
                                bar.update(len(chunk))

                if total > 0 and temp_path.stat().st_size != total:
                    raise IOError(f"Size mismatch: {temp_path.stat().st_size} != {total}")

                temp_path.rename(output_path)
                self.logger.info(f"Successfully downloaded: {output_path}")
                return output_path

            except (requests.RequestException, OSError) as e:
                if temp_path.exists():
                    temp_path.unlink()
                if attempt == self.max_retries - 1:
                    raise DownloadError(
                        f"Download of {url} failed after {self.max_retries} attempts: {e}",
                        file_name=str(output_path)
                    ) from e

                wait_time = min(self.retry_delay * 2 ** attempt, 60)
                self.logger.warning(f"Attempt {attempt + 1} failed. Retrying in {wait_time}s...")
                time.sleep(wait_time)

        raise DownloadError(f"Download of {url} was never attempted", file_name=str(output_path))
