"""RFP 응답 파이프라인: 문서 추출, 질문 분할, 지식 검색, 답변 초안 생성."""
