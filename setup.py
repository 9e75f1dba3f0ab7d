from setuptools import setup, find_packages
setup(
    name="la_jurisdictions",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages("src"),
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "fastapi",
        "pydantic",
        "uvicorn",
        "httpx",
        "shapely>=2.0",
        "folium",
        "branca",
        "jinja2",
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'la_jurisdictions=la_jurisdictions.__main__:_safe_main'
        ]
    }
)
