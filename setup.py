import setuptools

with open("README.rst", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="notevault",
    version="0.1.0",
    description="A folder of markdown notes behind a thread-safe, always-consistent content cache.",
    long_description=long_description,
    long_description_content_type="text/x-rst",
    packages=setuptools.find_packages('src'),
    package_dir={'': 'src'},
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    install_requires=[
        'Mako>=1.1.3',
    ],
    extras_require={
        'test': [
            'pytest',
            'pyfakefs',
        ],
    },
    python_requires='>=3.9',
)
