"""Read and write Wwise sound bank (BNK) and package (PCK) files."""

__version__ = "0.2.2"
__all__ = [
    "binio",
    "errors",
    "pck",
    "hirc_common",
    "music_segment",
    "music_track",
    "music_ran_seq_cntr",
    "hirc",
    "bnk",
]