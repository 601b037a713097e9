#!/usr/bin/env python3
"""
Setup script for the sortly service and its shared package

Packages live under backend/ (`shared`, `sortly`).
"""

from setuptools import find_namespace_packages, setup

setup(
    name="sortly",
    version="0.1.0",
    description="Paste tabular text, sort it by multiple columns, share it as a self-contained link",
    package_dir={"": "backend"},
    packages=find_namespace_packages(
        where="backend", include=["shared", "shared.*", "sortly", "sortly.*"]
    ),
    python_requires=">=3.10",
    install_requires=[
        # 🚀 Web Framework
        "fastapi>=0.104.1",
        "uvicorn[standard]>=0.24.0",

        # 📋 Data Validation & Settings
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",
        "python-dotenv>=1.0.0",

        # 🗄️ History store backend
        "redis[hiredis]>=5.0.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "httpx>=0.25.2",
        ],
    },
)
