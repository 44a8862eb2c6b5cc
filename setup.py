"""buddy-sync setup - offline queue and sync for the Buddy learning app."""
from setuptools import setup, find_packages

setup(
    name="buddy-sync",
    version="1.0.0",
    description="buddy-sync: offline action queue and sync engine for the Buddy learning app",
    packages=find_packages(include=["buddy_sync", "buddy_sync.*", "buddy_sync_cli", "buddy_sync_cli.*"]),
    python_requires=">=3.10",
    install_requires=[
        "click>=8.0",
        "httpx>=0.27",
        "blake3>=0.4",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "buddy-sync=buddy_sync_cli.main:cli",
        ],
    },
)
