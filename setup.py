import os
from setuptools import setup, find_namespace_packages
from setuptools.command.build_py import build_py as _build

CLASSIFIERS = [
    'Operating System :: POSIX',
    'Operating System :: MacOS :: MacOS X',
    'Intended Audience :: Science/Research',
    'Programming Language :: Python',
    'Programming Language :: Python :: 3',
    'Topic :: Scientific/Engineering'
]

pkgdir = os.path.dirname(os.path.abspath(__file__))
srcdir = 'python'

def get_version():
    out = "dev"
    versfile = os.path.join(pkgdir, 'VERSION')
    if os.path.exists(versfile):
        with open(versfile) as fd:
            parts = fd.readline().split()
        if len(parts) > 0:
            out = parts[-1]
    return out

def write_version_mod(version, buildlib):
    nsdir = os.path.join(buildlib, 'researchspace')
    if not os.path.isdir(nsdir):
        return
    for pkg in [f for f in os.listdir(nsdir) \
                  if not f.startswith('_') and not f.startswith('.')
                     and os.path.isdir(os.path.join(nsdir, f))]:
        versmodf = os.path.join(nsdir, pkg, "version.py")
        with open(versmodf, 'w') as fd:
            fd.write('"""')
            fd.write("""
An identification of the subsystem version.  Note that this module file gets 
(over-) written by the build process.  
""")
            fd.write('"""\n\n')
            fd.write('__version__ = "')
            fd.write(version)
            fd.write('"\n')

class build(_build):

    def run(self):
        _build.run(self)
        write_version_mod(get_version(), self.build_lib)

setup(name='researchspace-dryad',
      version=get_version(),
      description="researchspace.dryad: an adapter for depositing ResearchSpace exports into Dryad",
      scripts=[ 'scripts/dryaddeposit.py' ],
      package_dir={'': srcdir},
      packages=find_namespace_packages(where=srcdir, include=['researchspace.*'],
                                      exclude=['researchspace.*.data']),
      package_data={'researchspace.dryad': [ 'data/*' ]},
      python_requires='>=3.9',
      install_requires=[ 'requests', 'PyYAML' ],
      extras_require={ 'test': [ 'pytest' ] },
      cmdclass={'build_py': build},
      classifiers=CLASSIFIERS,
      zip_safe=False
)
