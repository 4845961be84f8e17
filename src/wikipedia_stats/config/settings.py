# Standard library imports
import os
from pathlib import Path

# Base directory of the project (``config`` lives two levels below the root)
ROOT_DIR = Path(__file__).resolve().parents[3]

# Parser configuration settings
# buffer_size is both the read buffer of the raw file and the chunk size fed to lxml
PARSER_CONFIG = {
    'buffer_size': int(os.environ.get('PARSER_BUFFER_SIZE', 32768)),
    'root_tag': os.environ.get('PARSER_ROOT_TAG', 'mediawiki'),
}

# Worker pool configuration; the pool uses threads - 1 workers
PROCESSING_CONFIG = {
    'threads': int(os.environ.get('PROCESSING_THREADS', 4)),
    'min_threads': 1,
    'max_threads': 32,
    'timeout_seconds': float(os.environ.get('PROCESSING_TIMEOUT_SECONDS', 30 * 60)),
}

# Report rendering configuration
REPORT_CONFIG = {
    'top_n': int(os.environ.get('REPORT_TOP_N', 300)),
    'output': os.environ.get('REPORT_OUTPUT', 'statistics.txt'),
    'html_output': os.environ.get('REPORT_HTML_OUTPUT', 'statistics.html'),
}

# Downloader configuration for the dated dump mode
DOWNLOAD_CONFIG = {
    'wiki_code': os.environ.get('DOWNLOAD_WIKI_CODE', 'ruwiki'),
    'base_url': os.environ.get('DOWNLOAD_BASE_URL', 'https://dumps.wikimedia.org/'),
    # Path where downloaded dumps will be stored
    'download_dir': os.environ.get(
        'DOWNLOAD_DIR', str(ROOT_DIR / 'wikiTest')
    ),
    'max_retries': int(os.environ.get('DOWNLOAD_MAX_RETRIES', 3)),
    'retry_delay': int(os.environ.get('DOWNLOAD_RETRY_DELAY', 2)),
    'timeout': int(os.environ.get('DOWNLOAD_TIMEOUT', 30)),
}

# Location of the rotating application log
LOG_DIR = os.environ.get('LOG_DIR', str(ROOT_DIR / 'logs'))
