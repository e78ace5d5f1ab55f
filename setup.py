from setuptools import setup, find_packages
import re

# Read version from bihpayroll/__init__.py
with open('bihpayroll/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='bih-payroll',
    version=version,
    packages=find_packages(include=['bihpayroll', 'bihpayroll.*']),
    package_data={
        'bihpayroll': ['data/*.yaml'],
    },
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
        'rich>=13.0',
    ],
    extras_require={
        'mcp': [
            'mcp[cli]>=1.0.0',
        ],
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'bih-payroll=bihpayroll.cli.__main__:main',
            'bih-payroll-mcp=bihpayroll.mcp.server:run_server',
        ],
    },
    author='Personal',
    description='Payroll calculations for FBiH, RS and Brcko District.',
    python_requires='>=3.10',
)
