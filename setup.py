#!/usr/bin/env python
# coding: utf-8

from setuptools import setup, find_packages

setup(
    name='edgarproc',
    version='1.0',
    description=(
        'EDGAR anthropogenic emissions processing for atmospheric models'
    ),
    long_description    = """\
    Reads the sectors of the EDGAR inventory, applies the diurnal,
    seasonal, monthly and interannual scale factors and regrids the
    NOx, CO and SO2 emissions to the grid of a model.
    """,
    packages            = find_packages(include=['edgarproc', 'edgarproc.*']),
    python_requires     = '>=3.10',
    install_requires    = [
        'numpy',
        'pandas',
        'xarray',
        'netCDF4',
        'geopandas',
        'shapely>=2.0',
        'scipy',
        'pyyaml',
    ],
    extras_require      = {
        'test': ['pytest'],
    },
)
