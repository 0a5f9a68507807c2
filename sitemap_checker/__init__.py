# sitemap_checker/__init__.py
"""
SitemapChecker package initializer.
Defines the package version; the CLI lives in :mod:`sitemap_checker.cli`.
"""
__version__ = "0.1.0"
