#!/usr/bin/env python3
"""
linkdedup CLI: find duplicate files across folders, then list, delete or hard link them.

Words on the command line choose the mode (list, delete, hardlink, help) and
options (force, deletehl); every other word is a folder to search.
Deletion is permanent; every run leaves a dated audit log.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import logging
import os
import signal
import sys
import time
from dataclasses import dataclass, field
from typing import List, Optional, NoReturn

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

from linkdedup.core.models import (
    DeduplicationParams,
    DuplicateGroup,
    ResolutionPolicy,
    ResolutionReport,
    ResolveMode,
)
from linkdedup.commands import DeduplicationCommand
from linkdedup.errors import DedupError, DeleteError, PathNotFoundError, UsageError
from linkdedup.services.accountant import summary_message, tally
from linkdedup.services.audit_log import AuditLog, audit_logger, format_listing
from linkdedup.utils.convert_utils import ConvertUtils
from linkdedup.aliases import (
    DELETE_HARD_LINKS_WORD,
    EPILOG_TEXT,
    FORCE_WORD,
    HELP_WORD,
    MODE_ALIASES,
    TOKENS_HELP_TEXT,
)

EXIT_INTERRUPTED = 130
USAGE_HINT = "For usage information, use linkdedup help."


@dataclass
class ParsedTokens:
    """Result of sorting positional words into mode, options and folders."""
    mode: Optional[ResolveMode] = None
    force: bool = False
    include_hard_links: bool = False
    folders: List[str] = field(default_factory=list)


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self._stop_requested: bool = False

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8')

    @staticmethod
    def build_parser() -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="linkdedup",
            description="linkdedup: find duplicate files and delete them or replace them with hard links",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "tokens",
            nargs="*",
            metavar="WORD",
            help=TOKENS_HELP_TEXT
        )
        parser.add_argument(
            "--log-dir",
            default=None,
            type=str,
            metavar="DIR",
            dest="log_dir",
            help="Folder for the per-run log file.\n"
                 "Default: $LINKDEDUP_LOG_DIR, else the per-user log folder of the platform"
        )
        parser.add_argument(
            "--threads", "-t",
            default=0,
            type=int,
            metavar="N",
            help="Worker threads for scanning and hashing. Default: number of CPUs (max 32)"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show progress, statistics and every action taken"
        )
        return parser

    def parse_args(self, args=None) -> argparse.Namespace:
        """Parse command-line arguments. argparse itself exits with 2 on malformed input."""
        return self.build_parser().parse_args(args)

    @staticmethod
    def interpret_tokens(tokens: List[str]) -> ParsedTokens:
        """
        Sort words into mode, options and folders, independent of their order.

        Raises:
            UsageError: two different modes were given
        """
        parsed = ParsedTokens()
        for token in tokens:
            if token == HELP_WORD:
                # Handled before any parsing, see run()
                continue
            elif token in MODE_ALIASES:
                mode = MODE_ALIASES[token]
                if parsed.mode is not None and parsed.mode is not mode:
                    raise UsageError(
                        f"Multiple modes have been provided, {parsed.mode.value} and {token}."
                    )
                parsed.mode = mode
            elif token == FORCE_WORD:
                parsed.force = True
            elif token == DELETE_HARD_LINKS_WORD:
                parsed.include_hard_links = True
            else:
                parsed.folders.append(token)
        return parsed

    @staticmethod
    def prompt_for_folder() -> str:
        """Ask for exactly one folder when none was given on the command line."""
        print("Drag a folder to search onto the terminal, then press return. "
              "Folders are searched recursively without limit.")
        try:
            answer = input("> ")
        except EOFError:
            raise UsageError("No folder to search was given.") from None
        answer = answer.strip()
        if not answer:
            raise UsageError("No folder to search was given.")
        return answer

    @staticmethod
    def validate_roots(folders: List[str]) -> List[str]:
        """Expand and check every folder before anything is scanned."""
        roots = []
        for folder in folders:
            path = os.path.abspath(os.path.expanduser(folder))
            if not os.path.isdir(path):
                raise PathNotFoundError(folder)
            roots.append(path)
        return roots

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(
                f"\r  [{stage}] {current}/{total} ({percent:.1f}%)"
            )
            sys.stderr.flush()
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files processed...")
            sys.stderr.flush()

    def stopped_flag(self) -> bool:
        """True once the user pressed Ctrl+C."""
        return self._stop_requested

    def _handle_sigint(self, signum, frame) -> None:
        if self._stop_requested:
            # Second Ctrl+C: stop right now
            raise KeyboardInterrupt
        self._stop_requested = True
        self.warning("Interrupted, stopping before the next file is changed...")

    def output_listing(self, groups: List[DuplicateGroup]) -> None:
        for line in format_listing(groups):
            print(line)

    def report_summary(self, report: ResolutionReport) -> None:
        message = summary_message(tally(report), report.policy.include_hard_links)
        AuditLog.record_message(message)
        # In verbose mode the audit echo handler has printed it already
        if not self.quiet and not self.verbose:
            print(message)

        # Forced failures go to the audit log; the console hears about them only in verbose mode
        failures = report.failures
        if failures and self.verbose:
            self.warning(f"{len(failures)} file(s) could not be changed, see the log for details.")

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        if code == UsageError.exit_code:
            print(USAGE_HINT, file=sys.stderr)
        sys.exit(code)

    def run(self, args=None) -> None:
        """Main entry point with conditional output behavior."""
        ns = self.parse_args(args)
        self.verbose = ns.verbose
        self.quiet = ns.quiet
        if self.verbose:
            logging.getLogger("linkdedup").setLevel(logging.INFO)

        if HELP_WORD in ns.tokens:
            self.build_parser().print_help()
            return

        echo_handler = None
        if self.verbose:
            echo_handler = logging.StreamHandler(sys.stdout)
            audit_logger.addHandler(echo_handler)

        try:
            with AuditLog(ns.log_dir) as audit:
                if self.verbose and audit.path:
                    print(f"Log: {audit.path}")
                try:
                    self._run(ns)
                except DedupError as e:
                    AuditLog.record_message(f"Error: {e}", logging.ERROR)
                    self.error_exit(str(e), e.exit_code)
        finally:
            if echo_handler is not None:
                audit_logger.removeHandler(echo_handler)

    def _run(self, ns: argparse.Namespace) -> None:
        parsed = self.interpret_tokens(ns.tokens)
        mode = parsed.mode or ResolveMode.LIST

        # Rejects conflicting words before the user is asked for anything
        ResolutionPolicy(mode=mode, force=parsed.force, include_hard_links=parsed.include_hard_links)

        folders = parsed.folders or [self.prompt_for_folder()]
        params = DeduplicationParams(
            roots=self.validate_roots(folders),
            mode=mode,
            force=parsed.force,
            include_hard_links=parsed.include_hard_links,
            threads=ns.threads,
            log_dir=ns.log_dir,
        )
        AuditLog.record_run(params.roots, params.policy)

        previous_handler = signal.signal(signal.SIGINT, self._handle_sigint)
        try:
            self._process(params)
        finally:
            signal.signal(signal.SIGINT, previous_handler)

    def _process(self, params: DeduplicationParams) -> None:
        command = DeduplicationCommand()
        if self.verbose:
            print(f"Searching for duplicates (mode: {params.mode.display_name})...")

        groups, stats = command.execute(
            params,
            progress_callback=self.progress_callback if self.verbose else None,
            stopped_flag=self.stopped_flag
        )
        if self.verbose:
            sys.stderr.write("\n")
            print(stats.print_summary())

        if self._stop_requested:
            self._exit_interrupted()

        for path, reason in stats.hash_failures:
            AuditLog.record_message(f"Skipped unreadable file {path}: {reason}", logging.WARNING)

        AuditLog.record_duplicates(groups)
        if not groups:
            if not self.quiet:
                print("No duplicates found.")
            return

        if params.mode is ResolveMode.LIST:
            self.output_listing(groups)
            return

        try:
            report = command.resolve(groups, params, stopped_flag=self.stopped_flag)
        except DeleteError as e:
            # Partial summary, only when the aborted run already removed something
            if e.report is not None and tally(e.report).files_deleted:
                self.report_summary(e.report)
            raise

        self.report_summary(report)
        if report.cancelled:
            self._exit_interrupted()

        if self.verbose:
            elapsed = time.time() - self.start_time
            print(f"\n✅ Completed in {ConvertUtils.seconds_to_human(elapsed)}")

    def _exit_interrupted(self) -> NoReturn:
        AuditLog.record_message("Run cancelled by user.", logging.WARNING)
        self.warning("Operation cancelled by user (Ctrl+C)")
        sys.exit(EXIT_INTERRUPTED)


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)", file=sys.stderr)
        sys.exit(EXIT_INTERRUPTED)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
