"""ebdeploy - zero-downtime deployments to Elastic Beanstalk environments."""

__version__ = "0.1.0"
