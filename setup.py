#!/usr/bin/python
from setuptools import setup, find_packages

setup(
      name='pyfanssh',
      version='0.1.0',
      description='Run one command or upload one file on many hosts over SSH',
      author='pyfanssh developers',
      maintainer='witchc',
      author_email='lebowitzgerald407@gmail.com',
      url='https://github.com/souloss/pyfanssh',
      license='MIT',
      # 要打包的项目文件夹
      packages=find_packages(".", exclude=["pyfanssh.tests", "pyfanssh.tests.*"]),
      include_package_data=True,
      zip_safe=False,
      # 安装依赖的其他包
      install_requires = [
        "asyncssh",
        "click",
        "rich",
        "PyYAML",
        "marshmallow",
        "marshmallow-dataclass",
      ],
      extras_require={
        "test": [
          "pytest",
          "pytest-asyncio",
        ],
      },
    # 设置程序的入口
    # 安装后，命令行执行 `key` 相当于调用 `value`: 中的 :`value` 方法
    entry_points={
        'console_scripts':[
            'pyfanssh = pyfanssh.__main__:main'
        ]
    },
    python_requires='>=3.10'
)
