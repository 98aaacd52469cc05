from setuptools import find_packages, setup
import os


def local_file(name):
    return os.path.relpath(os.path.join(os.path.dirname(__file__), name))

SOURCE = local_file("src")
README = local_file("README.rst")


setup(
    name='seqshrink',
    version="0.0.1",
    author='The seqshrink developers',
    packages=find_packages(SOURCE),
    package_dir={"": SOURCE},
    license='AGPL v3',
    description='Counterexample shrinking strategies for property based testing',
    zip_safe=False,
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: Implementation :: CPython",
    ],
    install_requires=['click'],
    extras_require={
        'test': ['pytest', 'hypothesis'],
    },
    long_description=open(README).read(),
    entry_points={
        'console_scripts': [
            'seqshrink=seqshrink.__main__:shrinker'
        ]
    }
)
