"""cli - cloud-discovery 명령줄 인터페이스"""
