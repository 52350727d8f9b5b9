#!/usr/bin/env python3

import os
from setuptools import setup, find_packages


here = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(here, 'README.md')) as f:
    README = f.read()

if __name__ == "__main__":
    setup(
        name = 'openstack-messaging',
        use_scm_version = {'fallback_version': '0.1.0'},
        description = 'Bindings for the OpenStack messaging and orchestration APIs.',
        long_description = README,
        long_description_content_type = 'text/markdown',
        classifiers = [
            "Programming Language :: Python",
            "Programming Language :: Python :: 3",
            "Framework :: Django",
            "Topic :: System :: Distributed Computing",
        ],
        keywords = 'openstack messaging queue orchestration django',
        packages = find_packages(include = ['openstack_messaging', 'openstack_messaging.*']),
        include_package_data = True,
        zip_safe = False,
        python_requires = '>=3.10',
        install_requires = [
            'requests',
            'pyyaml',
            'django',
            'django-settings-object @ git+https://github.com/cedadev/django-settings-object.git',
            'rackit @ git+https://github.com/cedadev/rackit.git',
        ],
        extras_require = {
            'test': ['pytest'],
        },
    )
