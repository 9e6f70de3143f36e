from setuptools import setup, find_packages

package_name = 'rollplanner'

setup(
    name=package_name,
    version='1.2.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={
        'config': [
            'shared/*.yaml',
            'catalog/*.yaml',
            'algorithms/*.yaml',
            'services/*.yaml',
            'system/*.yaml',
        ],
    },
    python_requires='>=3.9',
    install_requires=[
        'setuptools',
        'pyyaml>=6.0',
        'pydantic>=2.0',
        'structlog>=23.1',
        'httpx>=0.25',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
            'pytest-asyncio>=0.21',
        ],
    },
    zip_safe=False,
    description='Film stock recommendations and exposure guidance for film photographers',
    license='MIT',
    entry_points={
        'console_scripts': [
            'rollplanner = rollplanner.cli:main',
        ],
    },
)
