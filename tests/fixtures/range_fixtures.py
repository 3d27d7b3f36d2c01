"""Test data for host range classification tests.

Documents mirror the shape of the published Google Cloud and AWS range files,
trimmed to a handful of entries.
"""

from __future__ import annotations

from typing import Any, Dict

# Sample IP addresses for testing
SAMPLE_GCP_IP = "35.190.0.1"
SAMPLE_AWS_IP = "52.94.76.10"
SAMPLE_UNKNOWN_IP = "192.0.2.1"  # TEST-NET-1

GCP_RANGES: Dict[str, Any] = {
    "syncToken": "1718035200000",
    "creationTime": "2024-06-10T16:00:00.000000",
    "prefixes": [
        {"ipv4Prefix": "34.1.208.0/20", "service": "Google Cloud", "scope": "africa-south1"},
        {"ipv6Prefix": "2600:1900:8000::/44", "service": "Google Cloud", "scope": "africa-south1"},
        {"ipv4Prefix": "35.190.0.0/17", "service": "Google Cloud", "scope": "us-central1"},
    ],
}

AWS_RANGES: Dict[str, Any] = {
    "syncToken": "1718042593",
    "createDate": "2024-06-10-18-03-13",
    "prefixes": [
        {
            "ip_prefix": "3.5.140.0/22",
            "region": "ap-northeast-2",
            "service": "AMAZON",
            "network_border_group": "ap-northeast-2",
        },
        {
            "ip_prefix": "52.94.76.0/22",
            "region": "us-west-2",
            "service": "AMAZON",
            "network_border_group": "us-west-2",
        },
    ],
    "ipv6_prefixes": [
        {
            "ipv6_prefix": "2600:1f14::/35",
            "region": "us-west-2",
            "service": "AMAZON",
            "network_border_group": "us-west-2",
        }
    ],
}

# Failed login followed by unrelated lines, as found in /var/log/auth.log
SSHD_INVALID_USER_LINE = "Jun 10 18:04:01 bastion sshd[4121]: Invalid user admin from 35.190.0.1 port 52113"
SSHD_INVALID_USER_UNKNOWN_LINE = "Jun 10 18:04:07 bastion sshd[4125]: Invalid user oracle from 192.0.2.1 port 40022"
SSHD_ACCEPTED_LINE = (
    "Jun 10 18:05:12 bastion sshd[4130]: Accepted publickey for deploy from 52.94.76.10 port 51234 ssh2"
)
CRON_LINE = "Jun 10 18:06:00 bastion CRON[4200]: pam_unix(cron:session): session opened for user root"
