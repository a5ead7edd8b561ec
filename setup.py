#!/usr/bin/env python

import codecs

from setuptools import setup, find_packages

install_requires = []
requires = []

extras_require = {
    "simplejson": ["simplejson"],
    "test": ["pytest"],
}

with codecs.open("README.md", "r", "utf-8") as f:
    long_description = f.read()

setup(
    name="riakhttp",
    version="1.0.0",
    packages=find_packages(),
    requires=requires,
    install_requires=install_requires,
    extras_require=extras_require,
    description="Python client for the Riak HTTP interface",
    long_description=long_description,
    long_description_content_type="text/markdown",
    zip_safe=True,
    include_package_data=True,
    license="Apache 2",
    platforms="Platform Independent",
    author="Basho Technologies",
    author_email="clients@basho.com",
    python_requires=">=3.7",
    classifiers=["License :: OSI Approved :: Apache Software License",
                 "Intended Audience :: Developers",
                 "Operating System :: OS Independent",
                 "Programming Language :: Python :: 3",
                 "Programming Language :: Python :: 3.8",
                 "Programming Language :: Python :: 3.9",
                 "Programming Language :: Python :: 3.10",
                 "Programming Language :: Python :: 3.11",
                 "Programming Language :: Python :: 3.12",
                 "Topic :: Database"]
)
