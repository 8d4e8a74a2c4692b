#!/usr/bin/env python

from setuptools import setup, find_namespace_packages

setup(
    name="mediahub-discovery",
    version="1.0.0",
    description="UDP discovery responder and client for media servers",
    author="MediaHub contributors",
    packages=find_namespace_packages("src", include="mediahub.*"),
    package_dir={"": "src"},
    package_data={"": ["py.typed"]},
    python_requires=">=3.10",
    install_requires=(
        "psutil",
        "rich",
    ),
    extras_require={
        "test": (
            "pytest",
            "pytest-timeout",
            "hypothesis",
        ),
    },
    entry_points={
        "console_scripts": [
            "mediahub-udp-server=mediahub.udp.cli:main",
            "mediahub-udp-list=mediahub.udp.list_cli:main",
        ],
    },
)
