# -*- coding: utf-8 -*-

import re

from setuptools import setup

extras_require = {
    "test": [
        "pytest>=7.0,<9.0",
        "pytest-cov>=4.0,<6.0",
        "pytest-xdist>=3.0,<4.0",
        "eth_abi>=4.0.0,<6.0.0",
        "hypothesis>=6.0,<7.0",
    ],
    "lint": [
        "black==23.12.0",
        "flake8==6.1.0",
        "flake8-bugbear==23.12.2",
        "flake8-use-fstring==1.4",
        "isort==5.13.2",
        "mypy==1.5",
    ],
    "dev": ["ipython", "pre-commit", "twine"],
}

extras_require["dev"] = extras_require["test"] + extras_require["lint"] + extras_require["dev"]

with open("README.md", "r") as f:
    long_description = f.read()


# the version lives in evmabi/version.py so that it can be read without
# importing the package (and its dependencies)
def _read_version():
    with open("evmabi/version.py", "r") as f:
        return re.search(r'^version = "([^"]+)"', f.read(), re.M).group(1)


setup(
    name="evmabi",
    version=_read_version(),
    description="evmabi: EVM words, the contract ABI and a query runner for EVM bytecode",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="evmabi developers",
    author_email="",
    license="Apache License 2.0",
    keywords="ethereum evm abi smart contract",
    include_package_data=True,
    packages=["evmabi", "evmabi.evm"],
    python_requires=">=3.10,<4",
    install_requires=[
        "cbor2>=5.4.6,<6",
        "pycryptodome>=3.5.1,<4",
        "py-evm>=0.10.0b4,<0.13",
        "eth-utils>=2.0.0",
        "eth-typing>=3.3.0",
    ],
    tests_require=extras_require["test"],
    extras_require=extras_require,
    classifiers=[
        "Intended Audience :: Developers",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
