import os
from glob import glob
from setuptools import setup

package_name = 'stopsign_routing'

data_files = [
    (os.path.join('share', package_name, 'config'), glob('config/*.yaml')),
]

setup(
    name=package_name,
    version='0.1.0',
    description='Color and shape based stop sign detection with route annotation',
    packages=[package_name, package_name + '.detectors', 'scripts'],
    data_files=data_files,
    python_requires='>=3.8',
    install_requires=[
        'numpy',
        'opencv-python',
        'PyYAML',
    ],
    extras_require={
        'test': ['pytest'],
    },
    zip_safe=True,
    entry_points={
        'console_scripts': [
            'detect-stop-signs = scripts.detect_stop_signs:main',
        ],
    },
)
