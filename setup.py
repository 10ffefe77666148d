from setuptools import setup, find_packages


install_requires = [
    'PyYAML>=3.0',
    'pyproj>=2',
    'jsonschema>=4',
]

tests_require = [
    'pytest',
    'Pillow>=8',
]


def long_description(changelog_releases=10):
    import re
    import textwrap

    readme = open('README.md').read()
    changes = ['Changes\n-------\n']
    version_line_re = re.compile(r'^\d\.\d+\.\d+\S*\s20\d\d-\d\d-\d\d')
    for line in open('CHANGES.txt'):
        if version_line_re.match(line):
            if changelog_releases == 0:
                break
            changelog_releases -= 1
        changes.append(line)

    changes.append(textwrap.dedent('''
        Older changes
        -------------
        See CHANGES.txt in the source distribution
        '''))
    return readme + ''.join(changes)


setup(
    name='MBTileStore',
    version="1.0.0",
    description='Read-only tile store for MBTiles files with tile schema detection',
    long_description=long_description(7),
    long_description_content_type='text/markdown',
    author='MBTileStore contributors',
    license='Apache Software License 2.0',
    packages=find_packages(),
    include_package_data=True,
    entry_points={
        'console_scripts': [
            'mbtilestore-util = mbtilestore.script.util:main',
        ],
    },
    package_data={'': ['*.json']},
    install_requires=install_requires,
    extras_require={
        'test': tests_require,
    },
    python_requires='>=3.9',
    classifiers=[
        "Development Status :: 4 - Beta",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: Database",
        "Topic :: Scientific/Engineering :: GIS",
    ],
    zip_safe=False
)
