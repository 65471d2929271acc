from setuptools import setup

setup(
    name='tmilib',
    version='0.1.0',
    packages=[
        'tmilib',
        'tmilib.features',
        'tmilib.utils'
    ],
    python_requires='>=3.8',
    install_requires=[],
    extras_require={
        'tests': ['pytest', 'pytest-asyncio'],   # collect and run tests
        'docs': 'sphinx_rtd_theme',              # the Sphinx theme we use
        'coverage': 'pytest-cov'                 # get test case coverage
    },
    entry_points={
        'console_scripts': [
            'tmilib-whisper = tmilib.utils.run:main'
        ]
    },

    keywords='twitch tmi irc whisper chat library python3 asyncio',
    description='An asyncio client for Twitch chat: tagged message decoding, whispers and commands.',
    license='BSD',

    zip_safe=True,
    test_suite='tests'
)
