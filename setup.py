# setup.py
from setuptools import setup, find_packages

setup(
    name="sitemap_checker",
    version="0.1.0",
    description="Website migration checker: compares sitemap pages of an old site with a new site",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "lxml>=4.9",
        "pydantic>=2.0",
        "PyYAML>=6.0",
        "click>=8.1",
        "Jinja2>=3.1",
        "fsspec>=2023.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "sitemap-checker=sitemap_checker.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
