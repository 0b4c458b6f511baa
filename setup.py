#!/usr/bin/env python3
"""
Setup configuration for the Arc Folder Archiver
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="arc-folder-archiver",
    version="1.0.0",
    author="",
    author_email="",
    description="Archive shared Arc browser folders by scraping their share page and re-render them on demand",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["arc_archiver", "arc_archiver.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "Topic :: Internet :: WWW/HTTP",
        "Topic :: Utilities",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "arc-archiver=arc_archiver.cli:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
