"""
------------------------------------------------------------------------------
Project:        DokuMini
File:           main.py
Version:        1.0.0
Producer:       thorsten.schnebeck@gmx.net
Generator:      Antigravity
Description:    Command line entry point. Initializes configuration, logging
                and the embedded store, restores the remembered session and
                dispatches archive commands (accounts, uploads, listings,
                statistics).
------------------------------------------------------------------------------
"""

import argparse
import getpass
import sys
from typing import List, Optional

from PyQt6.QtCore import QCoreApplication

from core.archive import ArchiveSession
from core.config import AppConfig
from core.database import DatabaseManager
from core.exceptions import AuthFailureError, DokuMiniError
from core.importer import FileBlob, suggest_display_name
from core.logger import setup_logging, get_logger
from core.models.types import Folder, SortKey, SortOrder
from core.utils.formatting import format_bytes, format_upload_date


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dokumini", description="DokuMini - Personal Document Archive")
    parser.add_argument("-P", "--profile", type=str, help="Application profile for isolation (e.g. 'dev')")
    parser.add_argument("--db", type=str, help="Override the database file location")
    sub = parser.add_subparsers(dest="command", required=True)

    for name in ("register", "login"):
        p = sub.add_parser(name, help=f"{name} with email and password")
        p.add_argument("email")
        p.add_argument("password", nargs="?", help="Prompted when omitted")

    sub.add_parser("logout", help="Forget the remembered session")
    sub.add_parser("whoami", help="Show the logged-in user")

    folders = [f.value for f in Folder]

    p = sub.add_parser("upload", help="Store a file in a folder")
    p.add_argument("folder", choices=folders)
    p.add_argument("file")
    p.add_argument("--name", help="Display name (default: file name without extension)")

    p = sub.add_parser("list", help="List the documents of a folder")
    p.add_argument("folder", choices=folders)
    p.add_argument("--search", default="", help="Case-insensitive filter on the display name")
    p.add_argument("--sort", choices=[k.value for k in SortKey], default=SortKey.UPLOAD_DATE.value)
    p.add_argument("--order", choices=[o.value for o in SortOrder], default=SortOrder.DESC.value)

    p = sub.add_parser("rename", help="Change the display name of a document")
    p.add_argument("id", type=int)
    p.add_argument("name")

    p = sub.add_parser("delete", help="Delete a document")
    p.add_argument("id", type=int)

    p = sub.add_parser("download", help="Write a stored document to disk")
    p.add_argument("id", type=int)
    p.add_argument("--to", dest="target_dir", help="Target folder (default: configured download folder)")

    sub.add_parser("stats", help="Folder counts and storage used")
    sub.add_parser("recent", help="The five newest uploads")

    p = sub.add_parser("site-name", help="Show or change the site title")
    p.add_argument("name", nargs="?")
    return parser


def _print_documents(docs, locale: str) -> None:
    if not docs:
        print("(no documents)")
        return
    for doc in docs:
        print(
            f"{doc.id:>5}  {doc.file_name:<40}  {format_upload_date(doc.upload_date, locale):<10}  "
            f"{format_bytes(doc.effective_size):>10}  {doc.folder.value}"
        )


def run_command(args: argparse.Namespace, archive: ArchiveSession, config: AppConfig) -> int:
    """Executes one parsed command against an initialized archive session."""
    cmd = args.command
    locale = config.get_language()

    if cmd == "register":
        password = args.password or getpass.getpass("Password: ")
        archive.register(args.email, password)
        print("Registration successful. Please log in.")
    elif cmd == "login":
        password = args.password or getpass.getpass("Password: ")
        user = archive.login(args.email, password)
        print(f"Welcome, {user.email}")
    elif cmd == "logout":
        archive.logout()
        print("Logged out.")
    elif cmd == "whoami":
        print(archive.user.email if archive.user else "(not logged in)")
    elif cmd == "upload":
        blob = FileBlob.from_path(args.file)
        name = args.name if args.name is not None else suggest_display_name(blob.name)
        doc = archive.upload(blob, name, args.folder)
        print(f"Uploaded document {doc.id}: {doc.file_name} ({format_bytes(doc.effective_size)})")
    elif cmd == "list":
        archive.open_folder(args.folder)
        _print_documents(archive.visible_documents(args.search, args.sort, args.order), locale)
    elif cmd == "rename":
        doc = archive.rename(args.id, args.name)
        print(f"Renamed document {doc.id} to {doc.file_name}")
    elif cmd == "delete":
        archive.delete(args.id)
        print(f"Deleted document {args.id}")
    elif cmd == "download":
        saved = archive.download(args.id, args.target_dir)
        print(f"Saved to {saved.path} ({saved.mime_type})")
    elif cmd == "stats":
        if archive.user is None:
            raise AuthFailureError("Not logged in")
        stats = archive.stats
        print(f"{archive.site_name} - {archive.user.email}")
        print(f"Total documents: {stats.total_documents}")
        print(f"Storage used:    {stats.formatted_total}")
        for folder in Folder:
            print(f"  {folder.value:<12} {stats.count_for(folder)}")
    elif cmd == "recent":
        if archive.user is None:
            raise AuthFailureError("Not logged in")
        _print_documents(archive.recent, locale)
    elif cmd == "site-name":
        if args.name:
            archive.site_name = args.name
        print(archive.site_name)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    DokuMini Entry Point.
    Initializes infrastructure and runs a single command.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    app_id = f"dokumini-{args.profile}" if args.profile else "dokumini"
    QCoreApplication.setApplicationName(app_id)

    app_config = AppConfig(profile=args.profile)

    setup_logging(
        level=app_config.get_log_level(),
        log_file=str(app_config.get_log_file_path()),
        component_levels=app_config.get_log_components()
    )
    logger = get_logger("core")
    logger.info(f"DokuMini started (Profile: {args.profile or 'default'}, command: {args.command})")

    db = None
    try:
        db = DatabaseManager(db_path=args.db or str(app_config.get_database_path()))
        archive = ArchiveSession(db, app_config)
        archive.restore_session()
        return run_command(args, archive, app_config)
    except DokuMiniError as e:
        logger.info(f"Command {args.command} failed: {e}")
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except OSError as e:
        logger.warning(f"Command {args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        if db is not None:
            db.close()


if __name__ == "__main__":
    sys.exit(main())
