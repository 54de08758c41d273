from linkdedup.core.models import ResolveMode

MODE_ALIASES = {
    "list": ResolveMode.LIST,
    "delete": ResolveMode.DELETE,
    "hardlink": ResolveMode.HARDLINK,
}

HELP_WORD = "help"
FORCE_WORD = "force"
DELETE_HARD_LINKS_WORD = "deletehl"

OPTION_WORDS = (FORCE_WORD, DELETE_HARD_LINKS_WORD)

TOKENS_HELP_TEXT = (
    "Mode words, option words and folders, in any order.\n"
    "Modes (choose one):\n"
    "  list     : List duplicate files, change nothing (default)\n"
    "  delete   : Delete duplicates, keep the first copy found\n"
    "  hardlink : Replace duplicates with hard links to the first copy found\n"
    "  help     : Show this help\n"
    "Options:\n"
    "  force    : Keep going when a file cannot be deleted or linked\n"
    "             (delete and hardlink only)\n"
    "  deletehl : Also delete paths that are hard links of the kept copy\n"
    "             (delete only)\n"
    "Any other word is a folder to search. Without one you will be asked for it.\n"
)

EPILOG_TEXT = """
Files named .DS_Store or .localized, symbolic links and anything inside a
folder whose name contains a dot are never touched.

Examples:
  List duplicates in Pictures
  %(prog)s ~/Pictures

  Delete duplicates across two folders, the copy found first is kept
  %(prog)s delete ~/Pictures /Volumes/Backup/Pictures

  Same as above but continue past files that cannot be deleted
  %(prog)s delete force ~/Pictures /Volumes/Backup/Pictures

  Replace duplicates with hard links, freeing the space of every extra copy
  %(prog)s hardlink ~/Music

  Also remove extra hard links to the kept copy
  %(prog)s delete deletehl ~/Music

Exit status:
  0 success, 1 folder not found, 2 usage error,
  3 a deletion failed without force, 4 listing files failed, 130 interrupted

Every run writes a dated log file; see --log-dir.
"""
