#!/usr/bin/env python
from setuptools import setup, find_packages

setup(
    name="temperature_logger",
    version="0.0.1",
    description="Serial protocol driver and sample download tools for standalone temperature data loggers",
    packages=find_packages(),
    entry_points={"console_scripts": ["temperature_logger = temperature_logger.run:run"]},
    # fmt: off
    install_requires=[
        "backoff",
        "pandas",
        "pyserial"
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-mock"
        ]
    },
    # fmt: on
    include_package_data=True,
)
