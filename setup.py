# SPDX-License-Identifier: Apache-2.0
#
#!/usr/bin/env python
import io
import os
from setuptools import setup, find_packages

ROOT_DIR = os.path.dirname(__file__)
SOURCE_DIR = os.path.join(ROOT_DIR)

exec(open('hfbdd/version.py').read())

with open('./requirements.txt') as reqs_txt:
    requirements = [line for line in reqs_txt]

with open('./requirements-test.txt') as test_reqs_txt:
    test_requirements = [line for line in test_reqs_txt]

setup(
    name='fabric-bdd-py',
    version=VERSION,  # noqa: F821
    keywords=('Hyperledger Fabric', 'BDD', 'Testing'),
    license='Apache License v2.0',
    description="BDD step library for testing Hyperledger Fabric networks.",
    long_description=io.open('README.md', encoding='utf-8').read(),
    author='Hyperledger Community',
    packages=find_packages(exclude=['test', 'test.*']),
    platforms='any',
    install_requires=requirements,
    extras_require={'test': test_requirements},
    zip_safe=False,
    test_suite='test',
    classifiers=[
            'Development Status :: 3 - Alpha',
            'Environment :: Other Environment',
            'Intended Audience :: Developers',
            'Operating System :: OS Independent',
            'Programming Language :: Python',
            'Programming Language :: Python :: 3',
            'Topic :: Software Development :: Testing',
            'License :: OSI Approved :: Apache Software License',
    ],
    include_package_data=True,
)
