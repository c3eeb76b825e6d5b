"""
Toolchain installation orchestration.

The InstallCoordinator runs resolve -> fetch -> extract -> link for every
family, in a fixed order, while holding the rzup install lock. The first
failure stops the run; families already activated in that run stay
activated, and the returned report says exactly which ones those are.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from rzup.config.parser import RzupConfig
from rzup.core.directory import get_lock_path, get_toolchains_dir
from rzup.core.download import DownloadProgress
from rzup.core.exceptions import RzupError
from rzup.core.filesystem import temporary_directory
from rzup.core.locking import InstallLock
from rzup.core.platform import detect_host_triple
from rzup.toolchain.extractor import ArchiveExtractor
from rzup.toolchain.families import ToolchainFamily, default_families, get_family
from rzup.toolchain.fetcher import ArchiveFetcher
from rzup.toolchain.linking import InstalledToolchain, Linker, create_linker
from rzup.toolchain.resolver import ReleaseResolver, create_http_session

logger = logging.getLogger(__name__)


class InstallPhase(Enum):
    """Where an install run currently is."""

    IDLE = "idle"
    LOCK_ACQUIRED = "lock-acquired"
    RESOLVING = "resolving"
    FETCHING = "fetching"
    EXTRACTING = "extracting"
    LINKING = "linking"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class InstallReport:
    """Outcome of one ``install_all`` run."""

    host: str
    installed: List[InstalledToolchain] = field(default_factory=list)
    failed_family: Optional[str] = None
    error: Optional[RzupError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_failure(self) -> None:
        """Re-raise the error that aborted the run, if any."""
        if self.error is not None:
            raise self.error


class InstallCoordinator:
    """
    Installs every toolchain family rzup manages.

    Example:
        >>> coordinator = InstallCoordinator(load_config())
        >>> report = coordinator.install_all("latest")
        >>> report.ok
        True
    """

    def __init__(
        self,
        config: RzupConfig,
        families: Optional[Sequence[ToolchainFamily]] = None,
        resolver: Optional[ReleaseResolver] = None,
        fetcher: Optional[ArchiveFetcher] = None,
        extractor: Optional[ArchiveExtractor] = None,
        linkers: Optional[Dict[str, Linker]] = None,
        host: Optional[str] = None,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    ):
        """
        Args:
            config: Effective rzup configuration
            families: Families to install, in order (default: cpp, then rust)
            resolver: Release resolver (default: GitHub API from config)
            fetcher: Asset fetcher (default: shares the resolver's session)
            extractor: Archive extractor
            linkers: Linker per family name (default: chosen by link kind)
            host: Host triple (default: detected at the start of each run)
            progress_callback: Receives download progress of each asset
        """
        self.config = config
        self.families = list(
            families
            if families is not None
            else default_families(config.rust_toolchain_name, config.cpp_version)
        )

        session = None
        if resolver is None or fetcher is None:
            session = create_http_session(config.github_token)
        self.resolver = resolver or ReleaseResolver(
            session=session,
            api_base_url=config.api_base_url,
            timeout=config.http_timeout,
        )
        self.fetcher = fetcher or ArchiveFetcher(
            session=session,
            timeout=config.http_timeout,
            progress_callback=progress_callback,
        )
        self.extractor = extractor or ArchiveExtractor()
        self.linkers = dict(linkers or {})
        for family in self.families:
            self.linkers.setdefault(family.name, create_linker(family, config.home))

        self.host = host
        self.phase = InstallPhase.IDLE

    @property
    def toolchains_dir(self) -> Path:
        return get_toolchains_dir(self.config.home)

    def _enter(self, phase: InstallPhase, family: Optional[ToolchainFamily] = None):
        self.phase = phase
        suffix = f" [{family.name}]" if family else ""
        logger.debug(f"Install phase: {phase.value}{suffix}")

    def select_families(
        self, names: Optional[Sequence[str]] = None
    ) -> List[ToolchainFamily]:
        """
        Families to install, in install order.

        Args:
            names: Family names to keep; None keeps all of them

        Raises:
            KeyError: If a name matches no configured family
        """
        if names is None:
            return list(self.families)
        wanted = {get_family(name, self.families).name for name in names}
        return [family for family in self.families if family.name in wanted]

    def install_all(
        self,
        selector: Optional[str] = None,
        families: Optional[Sequence[str]] = None,
        ignore_pins: bool = False,
    ) -> InstallReport:
        """
        Install families under the install lock.

        Args:
            selector: None or "latest", or an explicit tag; families with a
                pinned version ignore it
            families: Names of the families to install (default: all)
            ignore_pins: Apply an explicit ``selector`` to pinned families too

        Returns:
            InstallReport listing activated toolchains and the first failure

        Raises:
            KeyError: If ``families`` names an unknown family
            UnsupportedHost: If the host has no pre-built toolchains
            LockUnavailable: If another process holds the lock past the timeout
        """
        self._enter(InstallPhase.IDLE)
        selected = self.select_families(families)
        host = self.host or detect_host_triple()
        report = InstallReport(host=host)

        with InstallLock(get_lock_path(self.config.home), self.config.lock_timeout):
            self._enter(InstallPhase.LOCK_ACQUIRED)
            for family in selected:
                try:
                    installed = self.install_family(family, selector, host, ignore_pins)
                except RzupError as e:
                    self._enter(InstallPhase.ABORTED, family)
                    logger.error(f"Installation of {family.name} toolchain failed: {e}")
                    report.failed_family = family.name
                    report.error = e
                    return report
                report.installed.append(installed)

        self._enter(InstallPhase.DONE)
        return report

    def install_family(
        self,
        family: ToolchainFamily,
        selector: Optional[str],
        host: str,
        ignore_pin: bool = False,
    ) -> InstalledToolchain:
        """
        Resolve, fetch, extract and link one family.

        Must be called with the install lock held.
        """
        self._enter(InstallPhase.RESOLVING, family)
        if not (ignore_pin and selector):
            selector = family.selector_for(selector)
        descriptor = self.resolver.resolve(family, selector)

        with temporary_directory(prefix=f"rzup_{family.name}_") as scratch:
            self._enter(InstallPhase.FETCHING, family)
            archive = self.fetcher.fetch(descriptor, family, host, scratch)

            self._enter(InstallPhase.EXTRACTING, family)
            extracted = self.extractor.extract(
                archive, family, self.toolchains_dir, descriptor.tag_name, host
            )

        logger.info(f"Downloaded {family.name} toolchain to {extracted}")

        self._enter(InstallPhase.LINKING, family)
        installed = self.linkers[family.name].link(
            extracted, family, descriptor.tag_name
        )
        logger.info(
            f"{family.name} toolchain {descriptor.tag_name} installed to {installed.path}"
        )
        return installed


__all__ = ["InstallCoordinator", "InstallPhase", "InstallReport"]
