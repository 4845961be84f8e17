from setuptools import setup, find_packages

setup(
    name="wikipedia_stats",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "requests>=2.20.0",
        "lxml",
        "tqdm",
        "icecream",
    ],
    extras_require={
        "dev": [
            "pytest",
        ]
    },
    python_requires=">=3.8",
    entry_points={
        "console_scripts": [
            "wiki-stats=wikipedia_stats.cli:main",
        ],
    },
)
