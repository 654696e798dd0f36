"""분석기 공용 유틸리티

core(인프라) 위, analyzers 아래 계층입니다. 현재는 보고서 입출력(shared.io)만 있습니다.
"""
