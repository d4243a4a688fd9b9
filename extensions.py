from public_dirs import PublicDirs

public_dirs = PublicDirs()
