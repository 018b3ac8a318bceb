# coding=utf-8

import codecs
import re
from os.path import join, dirname

from setuptools import setup, find_packages


def read(filename):
    return codecs.open(join(dirname(__file__), filename), 'r', 'utf-8').read()


def find_version(file_path):
    version_file = read(file_path)
    version_match = re.search(r"^__version__ = ['\"]([^'\"]*)['\"]",
                              version_file, re.M)
    if version_match:
        return version_match.group(1)
    raise RuntimeError('Unable to find version string.')


setup(
    name='pyelastomer',
    version=find_version(join('pyelastomer', '__init__.py')),
    description='Search-cluster client with self-flushing bulk sessions',
    long_description=read('README.rst'),
    license='BSD',
    packages=find_packages(),
    include_package_data=True,
    zip_safe=False,
    python_requires='>=3.8',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: BSD License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Internet :: WWW/HTTP :: Indexing/Search'
    ],
    install_requires=[
        # 7.14 added a product check that refuses non-Elasticsearch servers.
        'elasticsearch>=7.0.0,<7.14',
        'urllib3>=1.21.1,<2.0',
        'simplejson>=3.0',
        'certifi'
    ],
    extras_require={
        'test': ['pytest'],
    },
)
