from setuptools import setup

setup(
    name =             "tabbed-py",
    version =          "0.1.0",
    author =           "Christoph Landgraf",
    author_email =     "christoph.landgraf@googlemail.com",
    description =      "Embed X11 windows into a container as tabs",
    license =          "BSD",
    packages =         ['tabbed', 'tabbed_client'],
    python_requires =  ">=3.11",
    install_requires = [
        'python-xlib',
        'pycairo',
    ],
    extras_require =   {'test': ['pytest']},
    entry_points =     {'console_scripts': [
        'tabbed-py = tabbed.__main__:main',
        'tabctl = tabbed_client.__main__:main',
    ]}
)
