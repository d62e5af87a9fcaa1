# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from setuptools import setup, find_packages
from pathlib import Path

here = Path(__file__).parent.resolve()

def read_long_description():
    for candidate in ("ABOUT.md", "PYPI_DESCRIPTION.md", "README.md"):
        path = here / candidate
        if path.exists():
            return path.read_text(encoding="utf-8"), "text/markdown"
    return "remeta: pluggable metadata store clients (local, remote OpenSearch, AWS).", "text/plain"

long_description, long_type = read_long_description()

setup(
    name="remeta",
    version="0.1.0dev0",
    description="remeta: pluggable metadata store clients (local, remote OpenSearch, AWS).",
    long_description=long_description,
    long_description_content_type=long_type,
    author="Rodrigo Rodrigues da Silva",
    author_email="rodrigopitanga@posteo.net",
    license="GPL-3.0-or-later",
    python_requires=">=3.10",
    packages=find_packages(include=["remeta", "remeta.*"]),
    include_package_data=True,
    install_requires=[
        "pyyaml>=6.0.2",
        "python-dotenv>=1.0.1",
        "boto3>=1.34.0",
        "botocore>=1.34.0",
        "opensearch-py>=2.4.0",
    ],
    extras_require={
        "test": ["pytest>=8.0"],
    },
    entry_points={
        "console_scripts": [
            "remetacli=remeta.cli:main_cli",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Database",
    ],
)
