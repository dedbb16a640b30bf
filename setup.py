import setuptools

with open("README.rst", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="opticbench",
    version="0.1.0",
    author="Michael J Hayford",
    author_email="mjhoptics@gmail.com",
    description="Optical bench modeling with energy flow, ray trace and "
                "ghost focus analysis",
    long_description=long_description,
    long_description_content_type="text/x-rst",
    license="BSD-3-Clause",
    package_dir={'': 'src'},
    packages=setuptools.find_packages('src'),
    python_requires=">=3.8",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: BSD License",
        "Operating System :: OS Independent",
        "Topic :: Scientific/Engineering :: Physics",
    ],
    keywords=['geometric optics', 'ray tracing', 'optical bench',
              'ghost focus', 'fluence', 'spectrum', 'energy flow'],
    install_requires=[
        "opticalglass",
        "numpy>=1.15.0",
        "scipy>=1.8.0",
        "json_tricks>=3.12.1",
        "pandas>=0.23.4",
        "attrs>=18.1.0",
        "transforms3d>=0.3.1",
        "anytree>=2.8.0",
        "packaging",
        ],
    extras_require={
        'tests': ["pytest"],
    },
)
