# src/localconfig/core/strings.py
"""Human-readable strings: variable descriptions and setup messages.

describe_variable() is the default DescriptionLookup used by the writer to
put a comment block above every assignment in the settings file.
format_message() renders the messages shown to the person running setup.
Applications with their own translations inject a different lookup.
"""

from __future__ import annotations

import textwrap
from typing import Any, Final

# Column at which lists of variable names are hard-wrapped
WRAP_COLUMNS = 70

VARIABLE_DESCRIPTIONS: Final[dict[str, str]] = {
    "create_htaccess": (
        "If you are using Apache as your web server, setup can create .htaccess\n"
        "files for you, which will keep this file and other files containing\n"
        "passwords from being visible on the web. Set to 0 if you maintain the\n"
        "web server configuration by hand."
    ),
    "webservergroup": (
        "The name of the group that your web server runs as. Files written by\n"
        "setup are made readable by this group. Leave empty when the web server\n"
        "runs as the same user that runs setup."
    ),
    "use_suexec": (
        "Set to 1 if the web server runs scripts as the owner of the script\n"
        "(suexec), so that permissions are tightened accordingly."
    ),
    "db_driver": 'Which database server you use: "mysql", "pg", "oracle" or "sqlite".',
    "db_service": "Oracle service name. Leave empty for other databases.",
    "db_host": (
        "The DNS name or IP address of the host the database server runs on.\n"
        "For SQLite this is ignored."
    ),
    "db_name": "The name of the database. For SQLite this is the name of the database file.",
    "db_user": "Who the application connects to the database as.",
    "db_pass": (
        "The password for the database user. Keep this file unreadable for\n"
        "anyone but the web server group."
    ),
    "db_port": (
        "The port the database server listens on. 0 means the default port for\n"
        "your database driver."
    ),
    "db_sock": "Path to the database server's Unix socket, if it uses one. Leave empty for the default.",
    "db_check": (
        "Set to 0 to skip checking that the database server version is\n"
        "supported. Only useful when the database is on another host and\n"
        "setup cannot query it."
    ),
    "db_mysql_ssl_ca_file": "Path to a PEM file with the certificate authority used to verify the MySQL server.",
    "db_mysql_ssl_ca_path": "Path to a directory of PEM certificate authorities used to verify the MySQL server.",
    "db_mysql_ssl_client_cert": "Path to the client certificate used for MySQL SSL connections.",
    "db_mysql_ssl_client_key": "Path to the private key matching db_mysql_ssl_client_cert.",
    "db_mysql_ssl_get_pubkey": "Set to 1 to request the server's RSA public key for password exchange.",
    "index_html": (
        "Set to 1 to create an index.html that redirects to the main page,\n"
        "for web servers that cannot serve scripts as directory indexes."
    ),
    "cvsbin": "Location of the cvs executable, used by optional attachment features.",
    "interdiffbin": (
        "Location of the interdiff executable from patchutils. Needed to show\n"
        "differences between two versions of a patch."
    ),
    "diffpath": "The directory containing the diff executable used by interdiff.",
    "site_wide_secret": (
        "A random string used to protect tokens and cookies. It is generated\n"
        "for you; there is no need to change it. Changing it invalidates all\n"
        "outstanding tokens."
    ),
    "jwt_secret": "A random string used to sign JSON Web Tokens. Generated automatically.",
    "param_override": (
        "Values here override the corresponding parameters configured through\n"
        "the web interface. Leave a value as None to use the configured one."
    ),
    "setrlimit": "Resource limits applied to each request process, as a JSON object.",
    "size_limit": "Maximum memory size, in kilobytes, a request process may reach before it is recycled.",
    "memcached_servers": (
        "Space separated list of memcached servers (host:port). Leave empty to\n"
        "disable memcached."
    ),
    "memcached_namespace": "Prefix added to every memcached key, so several installations can share a server.",
    "urlbase": "The base URL of the installation, for example https://bugs.example.com/",
    "canonical_urlbase": "The canonical URL to advertise to search engines. Defaults to urlbase when unset.",
    "logging_method": 'Where to send log output: "syslog", "stderr" or "file".',
    "nobody_user": "The email address of the account used for automated, unattended changes.",
    "attachment_base": (
        "A separate base URL for serving attachments, to keep untrusted content\n"
        "off the main domain. Leave empty to serve attachments from urlbase."
    ),
    "ses_username": "Username for sending mail through Amazon SES.",
    "ses_password": "Password for sending mail through Amazon SES.",
    "inbound_proxies": (
        "Comma separated list of IP addresses of reverse proxies in front of the\n"
        "web server, whose X-Forwarded-For headers are trusted."
    ),
    "shadowdb_user": "User for the read-only shadow database. Leave empty to reuse db_user.",
    "shadowdb_pass": "Password for the read-only shadow database user.",
    "datadog_host": "Host of the DogStatsD agent. Leave empty to disable metrics.",
    "datadog_port": "Port of the DogStatsD agent.",
}

MESSAGES: Final[dict[str, str]] = {
    "patchutils_missing": (
        "OPTIONAL NOTE: If you want to be able to use the 'difference between two\n"
        "patches' feature, you must install patchutils and set interdiffbin in\n"
        "{localconfig}."
    ),
    "lc_old_vars": (
        "{localconfig} contains the following variables that are no longer used.\n"
        "They have been moved to {old_file}: {vars}"
    ),
    "lc_new_vars": (
        "This version added the following variables to {localconfig}:\n"
        "\n"
        "{new_vars}\n"
        "\n"
        "Review the new values in {localconfig}, then run setup again."
    ),
    "error_localconfig_read": (
        "An error occurred reading {localconfig}:\n"
        "\n"
        "{error}\n"
        "\n"
        "Fix the file and run setup again."
    ),
    "error_localconfig_write": "Could not write {path}: {error}",
    "error_localconfig_env_mode": (
        "Configuration is sourced from environment variables ({switch} is set);\n"
        "{localconfig} is not updated in this mode."
    ),
}


def describe_variable(name: str) -> str:
    """Newline-terminated description of a schema variable ('' when unknown)."""
    text = VARIABLE_DESCRIPTIONS.get(name)
    if text is None:
        return ""
    return text + "\n"


def wrap_hard(text: str, columns: int = WRAP_COLUMNS) -> str:
    """Wrap a comma separated list at exactly ``columns`` characters."""
    return "\n".join(textwrap.wrap(text, width=columns, break_on_hyphens=False))


def format_message(key: str, **values: Any) -> str:
    """Render a setup message.

    Raises:
        KeyError: If key is not a known message or a placeholder is missing
    """
    return MESSAGES[key].format(**values)
