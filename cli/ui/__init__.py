"""
cli/ui - rich 콘솔 출력과 로깅 설정

출력 헬퍼와 RichHandler 로깅은 cli.ui.console에 있습니다. 테스트에서
모듈 속성(console, print_*)을 패치하므로 호출부는 모듈 경로로 가져옵니다.
"""
