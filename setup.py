# Packaging for the switchstat Prometheus exporter. Installs the switchstat
# package and the switchstat-monitor entry point.

from setuptools import setup

setup(
    name="switchstat",
    version="1.0.0",
    description="Prometheus exporter for port statistics of web-managed network switches",
    license="MIT",
    packages=["switchstat"],
    python_requires=">=3.8",
    install_requires=[
        "prometheus_client",
        "flask",
        "gunicorn",
        "requests",
        "beautifulsoup4",
    ],
    extras_require=dict(
        test=["pytest"],
    ),
    entry_points=dict(
        console_scripts=[
            "switchstat-monitor=switchstat.node_monitoring:main",
        ],
    ),
)
