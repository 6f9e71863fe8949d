"""CLI 명령 구현 모듈"""
