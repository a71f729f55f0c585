#!/usr/bin/env python3
"""
Setup script for speechtopics.
"""

from setuptools import setup, find_packages
import os

def parse_requirements(filename):
    """Parse a pip requirements file into a list of install_requires."""
    if not os.path.exists(filename):
        return []
    with open(filename, "r") as f:
        lines = f.readlines()
    return [
        line.strip()
        for line in lines
        if line.strip() and not line.strip().startswith("#")
    ]

setup(
    name="speechtopics",
    version="1.0.0",
    author="speechtopics developers",
    description="LDA topic modeling of speech corpora: topic names, rankings, filters and trends over time",
    packages=find_packages(include=["speechtopics", "speechtopics.*"]),
    package_data={"speechtopics": ["config.yaml"]},
    include_package_data=True,
    zip_safe=False,
    install_requires=parse_requirements("pip_requirements.txt"),
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["speechtopics=speechtopics.cli:main"]},
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
)
