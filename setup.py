#!/usr/bin/env python
# -*- encoding: utf-8 -*-

"""Setup Module for modelmatch"""

import io
import re

from os.path import dirname, join

from setuptools import find_packages, setup


def read(*names, **kwargs):
    """Helper method to read files"""
    return io.open(
        join(dirname(__file__), *names),
        encoding=kwargs.get("encoding", "utf8"),
    ).read()


def version():
    """Read the version from the package without importing it"""
    return re.search(
        r'^__version__ = "([^"]+)"',
        read("src", "modelmatch", "__init__.py"),
        re.M,
    ).group(1)


marshmallow_requires = ["marshmallow>=3.15.0"]

install_requires = marshmallow_requires

testing_requires = [
    "mock==5.1.0",
    "pytest-cov>=4.1.0",
    "pytest-mock>=3.12.0",
    "pytest>=7.4.3",
]

dev_requires = testing_requires + [
    "black>=23.11.0",
    "coverage>=7.3.2",
    "isort>=5.12.0",
    "nox>=2023.4.22",
]

setup(
    name="modelmatch",
    version=version(),
    license="BSD 3-Clause License",
    description="Test matchers for nested attributes declarations on models",
    long_description=read("README.rst"),
    packages=find_packages("src"),
    package_dir={"": "src"},
    include_package_data=True,
    zip_safe=False,
    python_requires=">=3.11",
    classifiers=[
        "Development Status :: 2 - Pre-Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: BSD License",
        "Operating System :: OS Independent",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3 :: Only",
        "Topic :: Software Development :: Testing",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    keywords=["testing", "matchers", "nested attributes", "models"],
    install_requires=install_requires,
    extras_require={
        "test": testing_requires,
        "tests": testing_requires,
        "testing": testing_requires,
        "dev": dev_requires,
        "all": dev_requires,
    },
)
