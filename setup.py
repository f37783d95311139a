from setuptools import setup, find_packages
import re

# Read version from mxfin/__init__.py
with open('mxfin/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='mx-fin',
    version=version,
    packages=find_packages(include=['mxfin', 'mxfin.*']),
    package_data={
        'mxfin': ['data/*.yaml', 'data/tax_rules/*.yaml'],
    },
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
        'rich>=13.0',
    ],
    extras_require={
        'mcp': [
            'mcp[cli]>=1.0.0,<2',
        ],
        'test': [
            'mcp[cli]>=1.0.0,<2',
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'mx-fin=mxfin.cli.__main__:main',
            'mx-fin-mcp=mxfin.mcp.server:run_server',
        ],
    },
    author='Personal',
    description='Mexican payroll tax and personal savings projection tools.',
    python_requires='>=3.10',
)
