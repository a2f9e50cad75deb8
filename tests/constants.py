class URLs:
    SIGNUP = "/api/auth/signup"
    LOGIN = "/api/auth/login"
    ME = "/api/auth/me"
    FILES = "/api/files"
    UPLOAD = "/api/files/upload"
    USAGE = "/api/files/usage"
    ADVISORY_VIEW = "/api/files/advisory-view"
    DOWNLOAD = "/api/files/{}/download"
    DELETE = "/api/files/{}"
    SEARCH = "/api/search"
