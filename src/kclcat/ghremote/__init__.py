"""
GitHub client for the repository containing the KCL files.

We use the following GitHub REST API endpoints:

    GET /user                                   credential validation
    GET /repos/{owner}/{repo}                   repository validation
    GET /repos/{owner}/{repo}/contents?ref=...  list the tracked files
    GET /repos/{owner}/{repo}/contents/{path}   fetch raw file content
    GET /repos/{owner}/{repo}/commits?path=...  revisions touching a file
    GET /repos/{owner}/{repo}/commits/{sha}     metadata of a revision

Every request carries the access token as a bearer credential. The
`Accept` header selects between JSON metadata and raw content.
"""

from .client import (
    GITHUB_API_URL,
    KCL_SUFFIX,
    GitHubRepositoryClient,
    RemoteFile,
    Revision,
)

__all__ = [
    "GITHUB_API_URL",
    "KCL_SUFFIX",
    "GitHubRepositoryClient",
    "RemoteFile",
    "Revision",
]
