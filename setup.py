from setuptools import setup, find_packages

setup(name='csvstream',
      version='0.1.0',
      description='Streaming RFC 4180 CSV reader and writer for byte streams',
      packages=find_packages(exclude=['tests', 'tests.*']),
      python_requires='>=3.8',
      install_requires=[],
      extras_require={'test': ['pytest']},
      zip_safe=False)
