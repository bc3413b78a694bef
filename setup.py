#!/usr/bin/env python3

from setuptools import setup, find_packages
import os

directory = os.path.dirname(os.path.abspath(__file__))

# long_description
readme_path = os.path.join(directory, 'README.md')

with open(readme_path) as read_file:
    long_description = read_file.read()


setup(
    name='legfed',
    version='0.1.0',
    author='Legume Federation',
    url='https://legumefederation.org/',
    description='Loaders turning legume genetic and genomic data into RDF',
    long_description=long_description,
    long_description_content_type='text/markdown',
    packages=find_packages(exclude=['tests', 'tests.*']),
    license='BSD',
    install_requires=[
        'psycopg2', 'rdflib', 'pyyaml', 'pandas', 'requests'],
    include_package_data=True,
    package_data={'legfed': ['*.yaml']},
    data_files=[('translationtable', [
        'translationtable/GLOBAL_TERMS.yaml', 'translationtable/gff3file.yaml'])],

    keywords='legume genetics QTL genetic map chado rdf',
    classifiers=[
        'Intended Audience :: Science/Research',
        'Topic :: Scientific/Engineering :: Bio-Informatics',
        'License :: OSI Approved :: BSD License',
        'Programming Language :: Python :: 3',
    ],
    scripts=['./legfed-etl.py']
)
