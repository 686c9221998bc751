from setuptools import setup, find_packages

VERSION = '0.1.0'

setup(
    name="eventplan",
    version=VERSION,
    packages=find_packages(exclude=['test_project', 'test_project.*']),
    install_requires=[
        'Django>=4.2',
        'djangorestframework>=3',
        'pytz',
        'openpyxl>=3',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-django',
        ],
    },
    include_package_data=True,
    python_requires=">=3.10",
)
