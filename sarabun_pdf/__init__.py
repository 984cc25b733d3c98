"""
Sarabun PDF 公文生成系统 - 核心模块

模块结构：
- config/     运行期配置与日志
- models/     数据模型定义（请求/签署人/版面/结果）
- layout/     版面引擎（折行/分页/字段/表格/签名框）
- doc_gen/    文档生成（备忘录/发文/合并）
- pipeline/   生成流程编排
"""

__version__ = "0.1.0"
