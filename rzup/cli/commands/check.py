"""
Check command: compare installed toolchains with the newest releases.
"""

import logging
from typing import Optional

from rzup.cli.utils import print_error
from rzup.config import load_config
from rzup.core.directory import get_toolchains_dir
from rzup.core.exceptions import RzupError
from rzup.core.platform import detect_host_triple
from rzup.toolchain.extractor import installed_versions
from rzup.toolchain.families import ToolchainFamily, default_families
from rzup.toolchain.resolver import ReleaseResolver, create_http_session

logger = logging.getLogger(__name__)


def _dated(tag: str, published_at: Optional[str]) -> str:
    return f"{tag} ({published_at})" if published_at else tag


def _published_at(
    resolver: ReleaseResolver, family: ToolchainFamily, tag: str
) -> Optional[str]:
    try:
        return resolver.resolve(family, tag).published_at
    except RzupError as e:
        logger.debug(f"No release date for {family.name} {tag}: {e}")
        return None


def run(args) -> int:
    """
    Run the check command.

    Families pinned to a version are compared against that version rather
    than the latest release. The installed version is the most recently
    extracted one.

    Returns:
        Exit code (0 when every family could be checked)
    """
    try:
        config = load_config(args.home)
        host = detect_host_triple()
    except RzupError as e:
        print_error(str(e))
        return 1

    resolver = ReleaseResolver(
        session=create_http_session(config.github_token),
        api_base_url=config.api_base_url,
        timeout=config.http_timeout,
    )
    toolchains = get_toolchains_dir(config.home)

    exit_code = 0
    for family in default_families(config.rust_toolchain_name, config.cpp_version):
        installed = installed_versions(toolchains, family, host)

        try:
            release = resolver.resolve(family, family.selector_for(None))
        except RzupError as e:
            print_error(f"{family.name}: {e}")
            exit_code = 1
            continue

        latest = _dated(release.tag_name, release.published_at)
        if release.tag_name in installed:
            print(f"{family.name}: Up to date - {latest}")
            continue

        if installed:
            current_tag = installed[-1]
            current = _dated(current_tag, _published_at(resolver, family, current_tag))
        else:
            current = "none installed"
        print(f"{family.name}: Update available - {current} -> {latest}")

    return exit_code
