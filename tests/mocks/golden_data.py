"""
Golden data for tests: a SLES host before SAP tuning and a typical
/etc/sysconfig/sapconf.
"""

# Live kernel parameters of an untuned host (older kernel defaults).
UNTUNED_KERNEL = {
    "kernel.shmmax": "33554432",
    "kernel.shmall": "2097152",
    "kernel.shmmni": "4096",
    "kernel.sem": "250\t32000\t32\t128",
    "vm.max_map_count": "65530",
    "vm.pagecache_limit_mb": "2048",
    "vm.pagecache_limit_ignore_dirty": "1",
}

# Values the SAPCONF sysconfig below resolves to with default floors.
TUNED_KERNEL = {
    "kernel.shmmax": "18446744073692774399",
    "kernel.shmall": "1152921504606846720",
    "kernel.shmmni": "4096",
    "kernel.sem": "1250 256000 100 8192",
    "vm.max_map_count": "2147483647",
    "vm.pagecache_limit_mb": "0",
    "vm.pagecache_limit_ignore_dirty": "1",
}

SAPCONF = """\
## Path:        SAP/System Tuning/General
## Description: Kernel and OS tuning for SAP applications

# /dev/shm size as a percentage of RAM + swap (SAP note 941735)
VSZ_TMPFS_PERCENT=75

SHMMAX=18446744073692774399
SHMALL=1152921504606846720

# kernel.sem: SEMMSL SEMMNS SEMOPM SEMMNI
SEMMSL=1250
SEMMNS=256000
SEMOPM=100
SEMMNI=8192

MAX_MAP_COUNT=2147483647

ENABLE_PAGECACHE_LIMIT="no"
PAGECACHE_LIMIT_MB=""
PAGECACHE_LIMIT_IGNORE_DIRTY=1

LIMIT_1="@sapsys soft nofile 1048576"
LIMIT_2="@sapsys hard nofile 1048576"
LIMIT_3="@sdba soft nofile 1048576"
LIMIT_4="@sdba hard nofile 1048576"
LIMIT_5="@dba soft nofile 1048576"
LIMIT_6="@dba hard nofile 1048576"
"""

# 12,000,000 KB RAM + 4,000,000 KB swap
MEMINFO = """\
MemTotal:       12000000 kB
MemFree:         8000000 kB
MemAvailable:   10000000 kB
Buffers:          100000 kB
Cached:          1500000 kB
SwapCached:            0 kB
SwapTotal:       4000000 kB
SwapFree:        4000000 kB
Hugepagesize:       2048 kB
"""

MEMORY_TOTAL_KB = 16000000
SHM_SIZE_KB = 8000000
SHM_OPTIONS = "rw,nosuid,nodev,size=8000000k,inode64"

PROC_MOUNTS = """\
sysfs /sys sysfs rw,nosuid,nodev,noexec,relatime 0 0
proc /proc proc rw,nosuid,nodev,noexec,relatime 0 0
devtmpfs /dev devtmpfs rw,nosuid,size=4096k,nr_inodes=1048576,mode=755,inode64 0 0
tmpfs /dev/shm tmpfs rw,nosuid,nodev,size=8000000k,inode64 0 0
/dev/sda2 / btrfs rw,relatime,ssd,space_cache,subvolid=256,subvol=/@ 0 0
tmpfs /run tmpfs rw,nosuid,nodev,size=2400000k,nr_inodes=819200,mode=755,inode64 0 0
"""

LIMITS_CONF = """\
# /etc/security/limits.conf
#
#<domain>      <type>  <item>         <value>
*               soft    core            0
@sapsys soft nofile 65536
@sapsys hard nofile 65536
@dba    soft    nofile  32800
# End of file
"""
