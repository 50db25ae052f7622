#!/usr/bin/env python3
"""
Setup script for wsprobe, an interactive WebSocket client
"""

from setuptools import setup, find_namespace_packages

setup(
    name="wsprobe",
    version="0.1.0",
    description="Interactive terminal client for probing and debugging WebSocket servers",
    packages=find_namespace_packages(include=["wsprobe*", "shared*"]),
    install_requires=[
        "websockets==15.0",
        "click==8.1.7",
        "typer==0.12.3",
        "rich==13.9.2",
        "aioconsole==0.8.1",
    ],
    extras_require={
        "test": [
            "pytest==8.4.2",
            "pytest-asyncio==1.2.0",
        ],
    },
    python_requires=">=3.9",
    entry_points={
        'console_scripts': [
            'wsprobe=wsprobe.cli:app',
        ],
    },
)
