import setuptools

with open('README.md', 'r') as fh:
    long_description = fh.read()

setuptools.setup(
    name='qtatoms',
    version='0.1.0',
    description='Tools for inspecting the atom structure of QuickTime and MP4 files.',
    long_description=long_description,
    long_description_content_type='text/markdown',
    packages=setuptools.find_packages(where="src"),
    package_dir={"": "src"},
    package_data={"qtatoms.kernel": ["*.pyi"]},
    install_requires=[
        'deal',
        'parse',
        'PyYAML',
        'typer',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': ['qtatoms=qtatoms.runner:app'],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Programming Language :: Python :: 3',
        'Environment :: Console',
        'Intended Audience :: Developers',
        'Operating System :: OS Independent',
        'Topic :: Multimedia :: Video',
        'Topic :: Utilities'
    ],
    python_requires='>=3.8',
    keywords='quicktime mp4 mov isobmff atom box parse tree inspect'
)
