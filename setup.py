from setuptools import find_packages, setup

setup(
    name='simple-queue',
    version='1.0.0',
    description='Persistent queue of hook jobs with deferred execution',
    packages=find_packages(exclude=[
        'simplequeue.test',
        'simplequeue.test.*',
    ]),
    python_requires='>=3.8',
    install_requires=[
        'apscheduler>=3.9,<4',
        'chardet',
        'python-dateutil',
        'simplejson',
    ],
    extras_require={
        'test': [
            'mock',
            'pytest',
        ],
    },
    entry_points={
        "console_scripts": [
            "simple-queue = simplequeue.main:main",
        ],
    }
)
