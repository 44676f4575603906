#!/usr/bin/env python
# -*- coding: utf-8 -*-

import os

from setuptools import setup


BASE_DIR = os.path.dirname(__file__)

ABOUT = dict()
with open(os.path.join(BASE_DIR, "threshold_pre", "__about__.py")) as f:
    exec(f.read(), ABOUT)


with open(os.path.join(BASE_DIR, "README.rst")) as f:
    long_description = f.read()


INSTALL_REQUIRES = ['cryptography>=3.1',
                    'pynacl>=1.4',
                    'ecdsa>=0.18',
                    ]

EXTRAS_REQUIRE = {'testing': ['hypothesis',
                              'pytest',
                              'pytest-cov',
                              ],

                  'docs': ['sphinx', 'sphinx-autobuild'],
                  }


setup(name=ABOUT['__title__'],
      version=ABOUT['__version__'],
      author=ABOUT['__author__'],
      description=ABOUT['__summary__'],
      long_description=long_description,
      long_description_content_type='text/x-rst',
      license=ABOUT['__license__'],
      extras_require=EXTRAS_REQUIRE,
      install_requires=INSTALL_REQUIRES,
      packages=['threshold_pre'],
      classifiers=[
          "Development Status :: 3 - Alpha",
          "Intended Audience :: Science/Research",
          "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
          "Natural Language :: English",
          "Programming Language :: Python :: 3 :: Only",
          "Programming Language :: Python :: 3.8",
          "Programming Language :: Python :: 3.9",
          "Programming Language :: Python :: 3.10",
          "Programming Language :: Python :: 3.11",
          "Programming Language :: Python :: 3.12",
          "Topic :: Security :: Cryptography",
        ],
      python_requires='>=3.8',
      )
