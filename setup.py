from codecs import open
import re
from setuptools import setup
import sys

if 'sdist' in sys.argv or 'bdist_wheel' in sys.argv:
    long_description = open('README.md', 'r', 'utf-8').read()
else:
    long_description = ''

with open('pagexfer/version.py', 'r', 'utf-8') as fd:
    version = re.search(
        r'^__version__\s*=\s*[\'"]([^\'"]*)[\'"]',
        fd.read(), re.MULTILINE).group(1)

if not version or len(version) == 0:
    raise RuntimeError('Cannot find version')

packages = [
    'pagexfer',
    'pagexfer.models',
    'pagexfer.operations',
    'pagexfer.operations.azure',
    'pagexfer.operations.azure.blob',
    'pagexfer_cli',
]

install_requires = [
    'azure-storage-blob>=2.1.0,<3',
    'click>=8.0.1,<9',
    'python-dateutil>=2.8.2,<3',
    'requests>=2.26.0,<3',
    'ruamel.yaml>=0.17.3',
]

setup(
    name='pagexfer',
    version=version,
    author='Microsoft Corporation',
    author_email='',
    description='Concurrent chunked upload of disk images to Azure page blobs',
    platforms='any',
    license='MIT',
    long_description=long_description,
    long_description_content_type='text/markdown',
    packages=packages,
    package_data={'pagexfer': ['LICENSE']},
    package_dir={'pagexfer': 'pagexfer', 'pagexfer_cli': 'cli'},
    entry_points={
        'console_scripts': 'pagexfer=pagexfer_cli.cli:cli',
    },
    zip_safe=False,
    install_requires=install_requires,
    tests_require=['pytest'],
    extras_require={
        'test': ['pytest'],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Intended Audience :: Developers',
        'Intended Audience :: Information Technology',
        'Intended Audience :: System Administrators',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Topic :: Software Development :: Libraries :: Python Modules',
        'Topic :: Utilities',
    ],
    keywords=[
        'azure', 'storage', 'blob', 'page blob', 'vhd', 'disk image',
        'upload', 'pagexfer'
    ],
)
