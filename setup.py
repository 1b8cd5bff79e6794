from setuptools import find_packages, setup

setup(
    name='bgclips',
    version='1.0.0',
    description='Cut a gameplay video into looping background clips for the docs site',
    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    python_requires='>=3.9',
    install_requires=[
        'pydantic>=2.0',
        'PyYAML>=6.0',
        'tqdm>=4.60',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'bgclips=bgclips.cli.main:main',
        ],
    },
)
