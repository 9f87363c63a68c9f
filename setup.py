from setuptools import setup, find_packages

setup(
    name='online-balltree',
    version='0.1.0',
    description='Online ball tree for dynamic nearest neighbour search',
    packages=find_packages(exclude=('tests', 'tests.*', 'scripts')),
    python_requires='>=3.8',
    install_requires=[
        'numpy>=1.21.0',
        'scipy>=1.7.0',
        'scikit-learn>=1.0.0',
        'pandas>=1.3.0',
        'tqdm>=4.62.0',
    ],
    extras_require={
        'dev': [
            'pytest>=6.0.0',
        ],
    }
)
