from setuptools import setup, find_packages

setup(
    name="vine_filter",
    version="1.0.0",
    packages=find_packages(include=["vine_filter", "vine_filter.*"]),
    package_data={
        "vine_filter": ["config.cfg"]
    },
    install_requires=[
        'thinc>=8.0.0', 'srsly>=2.4.0', 'wasabi>=0.8.0', 'tqdm', 'jsonpickle',
        'falcon>=3.0.0'],
    extras_require={
        'test': ['pytest']
    }
)
