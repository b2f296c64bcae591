"""ec2-login - interactive ssh access to EC2 instances."""

__version__ = "0.1.0"
