#!/usr/bin/env python

from setuptools import find_packages, setup

from os.path import abspath, dirname, join

with open(join(dirname(abspath(__file__)), 'repgraph', 'version.py')) as version_file:
    exec(compile(version_file.read(), "version.py", 'exec'))

setup(name='repgraph',
      version=version,  # noqa: F821
      description="Matching and comparison of semantic dependency graphs",
      packages=find_packages(include=['repgraph', 'repgraph.*']),
      # 3.6 and up, but not Python 4
      python_requires='~=3.6',
      install_requires=[
          "attrs>=18.2.0",
          "vistautils>=0.12.0",
          "immutablecollections>=0.8.0",
          "networkx>=2.3",
          "more-itertools>=7.2.0"
      ],
      extras_require={
          "test": [
              "pytest",
              "pytest-benchmark",
          ]
      },
      scripts=[
      ],
      classifiers=[
          "Programming Language :: Python :: 3",
          "License :: OSI Approved :: MIT License",
          "Operating System :: OS Independent",
      ]
      )
