"""Projects domain - projects, media uploads, review links and members"""
